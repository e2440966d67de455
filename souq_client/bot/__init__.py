"""Discord front-end for the Souq client."""
