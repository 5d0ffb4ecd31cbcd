"""stackmon - terminal health dashboard for a local container stack."""

__version__ = "0.3.0"
