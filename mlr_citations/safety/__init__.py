from mlr_citations.safety.presence import check_presence
from mlr_citations.safety.requirements import SafetyRequirementsChecker, filter_statements

__all__ = ["SafetyRequirementsChecker", "check_presence", "filter_statements"]
