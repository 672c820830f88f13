"""
Reporting for the CLI.

Modules
-------
formatters : format_interval_report() + format_bias_report()
             + format_session_summary() — plain-text output for typer.echo().
"""
