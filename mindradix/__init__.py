"""
MindRadix 相似度与查重服务

Document similarity (TF-IDF) and heuristic plagiarism / AI-content auditing
for the MindRadix publication platform.
"""

__version__ = "1.0.0"
