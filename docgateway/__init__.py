"""
Document Task Gateway

Routes document-analysis tasks (summarize, answer-question, translate,
search, extract-entities, compare, assess-risk) to interchangeable AI/NLP
providers, normalizes their answers and degrades to labelled placeholders
when no provider can serve a task.
"""

__version__ = "1.0.0"
