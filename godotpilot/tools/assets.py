"""Placeholder sprite generation."""

from typing import Any, Dict

from godotpilot.checkpoint import atomic_write_text
from godotpilot.constants import ASSET_COLORS
from godotpilot.context import resolve_project_path, to_res_path
from godotpilot.session import ToolSession
from godotpilot.tools.schemas import GenerateAssetArgs

SVG_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" '
    'viewBox="0 0 {w} {h}">\n{body}\n</svg>\n'
)


def _shape(asset_type: str, w: int, h: int, color: str) -> str:
    """SVG body for one asset type. Shapes only need to read at a glance."""
    cx, cy = w / 2, h / 2
    r = min(w, h) / 2

    if asset_type in ("projectile", "pickup"):
        return f'  <circle cx="{cx}" cy="{cy}" r="{r * 0.6:.1f}" fill="{color}"/>'
    if asset_type == "item":
        points = f"{cx},{h * 0.1} {w * 0.9},{cy} {cx},{h * 0.9} {w * 0.1},{cy}"
        return f'  <polygon points="{points}" fill="{color}"/>'
    if asset_type in ("tile", "background"):
        return (
            f'  <rect width="{w}" height="{h}" fill="{color}"/>\n'
            f'  <rect x="1" y="1" width="{w - 2}" height="{h - 2}" fill="none" '
            f'stroke="#000000" stroke-opacity="0.25"/>'
        )
    if asset_type in ("ui", "icon"):
        return f'  <rect x="{w * 0.1}" y="{h * 0.1}" width="{w * 0.8}" height="{h * 0.8}" rx="{r * 0.3:.1f}" fill="{color}"/>'
    if asset_type in ("enemy", "boss"):
        points = f"{cx},{h * 0.05} {w * 0.95},{h * 0.95} {w * 0.05},{h * 0.95}"
        eye_y = h * 0.6
        return (
            f'  <polygon points="{points}" fill="{color}"/>\n'
            f'  <circle cx="{w * 0.4}" cy="{eye_y}" r="{r * 0.1:.1f}" fill="#FFFFFF"/>\n'
            f'  <circle cx="{w * 0.6}" cy="{eye_y}" r="{r * 0.1:.1f}" fill="#FFFFFF"/>'
        )

    # character, npc
    return (
        f'  <rect x="{w * 0.25}" y="{h * 0.35}" width="{w * 0.5}" height="{h * 0.6}" rx="{r * 0.1:.1f}" fill="{color}"/>\n'
        f'  <circle cx="{cx}" cy="{h * 0.22}" r="{r * 0.22:.1f}" fill="{color}"/>'
    )


def render_svg(asset_type: str, width: int, height: int, color: str) -> str:
    return SVG_TEMPLATE.format(w=width, h=height, body=_shape(asset_type, width, height, color))


def generate_asset(session: ToolSession, args: GenerateAssetArgs) -> Dict[str, Any]:
    """
    Write a placeholder SVG into the project.

    Raises:
        ProjectPathError: If the output path escapes the project root
    """
    color = args.color or ASSET_COLORS.get(args.type, "#FFFFFF")
    session.dock_log(f"[MCP] Generating {args.type} asset: {args.name} ({args.width}x{args.height})")

    output_dir = args.output_dir.rstrip("/")
    target = resolve_project_path(session.project_root, f"{output_dir}/{args.name}.svg")
    atomic_write_text(target, render_svg(args.type, args.width, args.height, color))

    res_path = to_res_path(session.project_root.resolve(), target)
    session.dock_log(f"[MCP] Asset saved: {res_path}")
    return {
        "ok": True,
        "path": res_path,
        "type": args.type,
        "width": args.width,
        "height": args.height,
        "color": color,
        "format": "svg",
    }
