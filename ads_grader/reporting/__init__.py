"""
ads_grader.reporting — Terminal formatting and flat-file export of grading results.

This package only presents a finished ``GradingResult``; it never scores.
Spreadsheet styling and email delivery belong to downstream collaborators,
which consume the JSON/CSV written here.

Modules:
  formatters — ASCII terminal formatters for Typer CLI commands.
  export     — JSON/CSV export helpers and the bounded report payload.
"""
