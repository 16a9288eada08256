"""
Scoring core: turns criterion results into category grades, an overall grade,
and a single prioritized recommendation list.

Modules
-------
grade_mapper : letter_for() — the only score → letter mapping in the code base.
aggregator   : weighted_mean() + aggregate_category() — pure functions.
prioritizer  : prioritize() + top_n() + severity_for() — stable impact ordering.
"""
