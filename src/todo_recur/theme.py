"""Console theme for Todo Recur output."""

from rich.console import Console
from rich.theme import Theme

CITY_LIGHTS_COLORS = {
    'primary': '#68D5F3',
    'secondary': '#5CCFE6',
    'accent': '#B7C5D3',
    'success': '#8BD649',
    'warning': '#FFD93D',
    'error': '#F78C6C',
    'critical': '#FF5370',
    'text_muted': '#4F5B66',
    'text_bright': '#FFFFFF',
}

TODO_THEME = Theme({
    'muted': CITY_LIGHTS_COLORS['text_muted'],
    'success': f"{CITY_LIGHTS_COLORS['success']} bold",
    'warning': f"{CITY_LIGHTS_COLORS['warning']} bold",
    'error': f"{CITY_LIGHTS_COLORS['error']} bold",
    'primary': f"{CITY_LIGHTS_COLORS['primary']} bold",
    'accent': CITY_LIGHTS_COLORS['accent'],
    'todo_completed': CITY_LIGHTS_COLORS['success'],
    'todo_today': CITY_LIGHTS_COLORS['warning'],
    'repeat': CITY_LIGHTS_COLORS['secondary'],
    'due_date': CITY_LIGHTS_COLORS['primary'],
    'due_date_overdue': f"{CITY_LIGHTS_COLORS['critical']} bold",
    'header': f"{CITY_LIGHTS_COLORS['text_bright']} bold",
})


def get_themed_console(no_color: bool = False) -> Console:
    """Get a console with the Todo Recur theme applied."""
    return Console(theme=TODO_THEME, no_color=no_color, highlight=False)


def get_status_emoji(completed: bool, is_today: bool = False) -> str:
    """Status marker shown in front of a task."""
    if completed:
        return "✅"
    if is_today:
        return "☀️"
    return "⏳"
