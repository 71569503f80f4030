"""Terminal front end: menus, prompts, rendering and the save file."""
