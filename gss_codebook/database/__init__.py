"""MongoDB storage for parsed codebook tables."""
