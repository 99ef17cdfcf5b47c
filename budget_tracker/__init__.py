"""SmartBudget: personal income, expense and budget tracking."""
