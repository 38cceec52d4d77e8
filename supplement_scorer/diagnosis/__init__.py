"""
Diagnosis personalization layer built on top of the scoring engine.

Modules
-------
tables          : static questionnaire / danger-ingredient lookup tables.
personalization : calculate_personalized_weights().
alerts          : detect_danger_alerts() + calculate_cost_per_day().
explain         : generate_recommendations() + generate_warnings().
persona         : check_persona_rules(): pregnancy / medication cautions.
engine          : diagnosis_score() + diagnosis_score_multiple().
"""
