"""HabitFlow terminal front end."""
