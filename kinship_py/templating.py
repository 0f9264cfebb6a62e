from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Any, Dict, Optional

from .config import PACKAGE_TEMPLATES_DIR
from .models import ProbabilityResult


def format_percent(value: float) -> str:
    if value < 0.01:
        return f"{value * 100:.3f}%"
    return f"{value * 100:.2f}%"


def format_coefficient(value: float) -> str:
    if value < 0.001:
        return f"{value:.2e}"
    return f"{value:.4f}"


def get_env(templates_dir: str | Path) -> Environment:
    templates_dir = str(templates_dir)
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["percent"] = format_percent
    env.filters["coefficient"] = format_coefficient
    return env


def render_template(templates_dir: str | Path, template_name: str, ctx: Dict[str, Any]) -> str:
    env = get_env(templates_dir)
    tmpl = env.get_template(template_name)
    return tmpl.render(**ctx)


def render_report(result: ProbabilityResult, person1_label: str, person2_label: str, templates_dir: Optional[str | Path] = None) -> str:
    change = None
    if result.delta_from_baseline != 0 and result.baseline_r:
        change = f"{result.delta_from_baseline / result.baseline_r * 100:.1f}"
    ctx = {
        "result": result,
        "person1": person1_label,
        "person2": person2_label,
        "change_percent": change,
    }
    return render_template(templates_dir or PACKAGE_TEMPLATES_DIR, "result.txt", ctx)
