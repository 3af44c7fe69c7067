"""
Rule Mining Module

Level-wise Apriori bundle mining:
- Candidate generation and adaptive support thresholds
- Frequent itemset mining
- Association rule derivation
"""
