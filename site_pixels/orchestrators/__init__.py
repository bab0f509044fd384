"""Orchestrators.

Runs the case study end to end:
1. Load sites, pixel grid and boundary layers
2. Compute resolution table and near/far buffer extraction
3. Render the overview map and write the report
"""
