"""Console drivers that exercise the invoice state machine."""
