"""
Reporting: flat CSV/JSON export and ASCII formatters for the CLI.

Modules
-------
export     : export_to_csv() + export_to_json() + flatten_*_result().
formatters : format_score_result() + format_diagnosis_result()
             + format_ranking_table().
"""
