"""Ad slot resolution."""
