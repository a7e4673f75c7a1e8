"""Kitchen inventory and meal-planning tools."""
