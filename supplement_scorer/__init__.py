"""
Supplement Scorer: multi-factor product scoring and questionnaire
personalization for supplement products.

Public entry points::

    from supplement_scorer.scoring.engine import score
    from supplement_scorer.diagnosis.engine import diagnosis_score
"""

__version__ = "0.1.0"
