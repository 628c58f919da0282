"""Transport adapters. Only stdio is provided."""
