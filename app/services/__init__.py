"""Services for the ResumeMatch Scoring API."""
from app.services.ats_scorer import ATSScorer, combine_ats_results, compute_ats_score, run_ats_analysis
from app.services.hr_scorer import compute_hr_score
from app.services.analysis import run_ats_pipeline, run_hr_pipeline

__all__ = [
    "ATSScorer",
    "combine_ats_results",
    "compute_ats_score",
    "run_ats_analysis",
    "compute_hr_score",
    "run_ats_pipeline",
    "run_hr_pipeline",
]
