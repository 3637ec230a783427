"""Domain layer - enums shared by orchestration and reporting."""
