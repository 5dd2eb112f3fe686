"""MPEG transport stream helpers: packets, PCRs, packetizing, throughput, histograms, TR 101 290 alarms and UDP reception."""

__version__ = "0.1.0"