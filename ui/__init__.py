"""HabitFlow web front end."""
