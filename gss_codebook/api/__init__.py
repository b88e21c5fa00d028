"""Query API over parsed codebook tables."""
