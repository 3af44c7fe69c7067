"""Post-processing of mined association rules."""
