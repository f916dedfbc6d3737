"""
Applicant matching: feature extraction, scoring, candidate selection
and orchestration.
"""
