"""Library modules for the derived-metrics components.

This package groups the rule engines that run on top of the prepared
transaction frame, reducing duplication between the snapshot pipeline and
the assistant.

Structure:
    - common/: Currency formatting and rounding
    - analytics/: Salary detection and spending rollups
    - budgets/: Budget windows and reconciliation
    - goals/: Goal progress evaluation
    - health/: Financial health score
    - recommendations/: Smart suggestions and insights
"""

__all__ = ['common', 'analytics', 'budgets', 'goals', 'health', 'recommendations']
