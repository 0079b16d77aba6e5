"""fontpreview command-line application."""
