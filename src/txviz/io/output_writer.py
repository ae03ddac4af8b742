from __future__ import annotations

import json
from html import escape
from pathlib import Path
from typing import Dict, List, Optional

from txviz.core.capacity import format_capacity, parse_capacity
from txviz.core.models import CellInfo, IllustrationData
from txviz.illustration.labels import truncate_middle
from txviz.illustration.scene import Scene
from txviz.io.schemas import illustration_data_to_dict, scene_to_dict
from txviz.io.svg import scene_to_svg


def _out_path(out_dir: str, filename: str) -> Path:
    p = Path(out_dir)
    p.mkdir(parents=True, exist_ok=True)
    return p / filename


def write_scene_svg(scene: Scene, out_dir: str, filename: str = "illustration.svg") -> str:
    out_path = _out_path(out_dir, filename)
    with out_path.open("w", encoding="utf-8") as f:
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        f.write(scene_to_svg(scene))
    return str(out_path)


def write_scene_json(scene: Scene, out_dir: str, filename: str = "scene.json") -> str:
    out_path = _out_path(out_dir, filename)
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=2)
    return str(out_path)


def write_data_json(data: IllustrationData, out_dir: str, filename: str = "transaction.json") -> str:
    """Resolved input data, reusable later with `txviz --input-json`."""
    out_path = _out_path(out_dir, filename)
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(illustration_data_to_dict(data), f, indent=2)
    return str(out_path)


def write_summary_md(data: IllustrationData, out_dir: str, filename: str = "summary.md") -> str:
    """
    Capacity totals per side, the fee they imply, and who owns what.
    """
    out_path = _out_path(out_dir, filename)

    total_in = sum((parse_capacity(c.capacity) for c in data.inputs), 0)
    total_out = sum((parse_capacity(c.capacity) for c in data.outputs), 0)

    def by_owner(cells: List[CellInfo]) -> Dict[str, int]:
        totals: Dict[str, int] = {}
        for c in cells:
            totals[c.lock.args] = totals.get(c.lock.args, 0) + parse_capacity(c.capacity)
        return totals

    def owner_lines(totals: Dict[str, int]) -> List[str]:
        ranked = sorted(totals.items(), key=lambda x: x[1], reverse=True)
        return [f"- **{format_capacity(v)}** | {truncate_middle(k, 10, 8)}\n" for k, v in ranked]

    lines = []
    lines.append("# Transaction Summary\n\n")
    lines.append(f"- Transaction: **{data.tx_hash or 'unknown'}**\n")
    lines.append(f"- Inputs: **{len(data.inputs)}** ({format_capacity(total_in)})\n")
    lines.append(f"- Outputs: **{len(data.outputs)}** ({format_capacity(total_out)})\n")
    if data.inputs and total_in >= total_out:
        lines.append(f"- Fee: **{format_capacity(total_in - total_out)}**\n")
    lines.append("\n")

    lines.append("## Inputs by owner (lock args)\n\n")
    if not data.inputs:
        lines.append("_No inputs (cellbase or unresolved)._\n\n")
    else:
        lines.extend(owner_lines(by_owner(data.inputs)))
        lines.append("\n")

    lines.append("## Outputs by owner (lock args)\n\n")
    if not data.outputs:
        lines.append("_No outputs._\n")
    else:
        lines.extend(owner_lines(by_owner(data.outputs)))

    with out_path.open("w", encoding="utf-8") as f:
        f.writelines(lines)

    return str(out_path)


def write_scene_html(
    scene: Scene,
    out_dir: str,
    filename: str = "index.html",
    title: str = "Transaction Illustration",
    link_template: Optional[str] = None,
) -> str:
    """
    Standalone page embedding the SVG. With `link_template` (containing
    `{tx_hash}`), clicking an input cell opens the transaction that created
    it; every click is also announced as a `txviz:click` DOM event.
    """
    out_path = _out_path(out_dir, filename)

    html = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>__TITLE__</title>
  <style>
    :root {
      --bg: #0f1115;
      --panel: #151824;
      --text: #e6e8ef;
      --muted: #9aa3b2;
    }
    body {
      margin: 0;
      font-family: "SF Mono", "Menlo", "Consolas", monospace;
      background: radial-gradient(circle at 20% 20%, #1b2130 0%, #0f1115 60%);
      color: var(--text);
    }
    header {
      padding: 16px 20px;
      border-bottom: 1px solid #23283a;
      background: var(--panel);
    }
    header h1 {
      margin: 0;
      font-size: 18px;
      letter-spacing: 0.5px;
    }
    header p {
      margin: 6px 0 0 0;
      font-size: 12px;
      color: var(--muted);
    }
    #illustration {
      padding: 20px;
      font-size: 12px;
    }
    #illustration g.cell[data-tx-hash] {
      cursor: pointer;
    }
  </style>
</head>
<body>
  <header>
    <h1>__TITLE__</h1>
    <p>Inputs on the left, outputs on the right. Circle size: log10 of capacity in CKB. Color: owner (lock args).</p>
  </header>
  <div id="illustration">
__SVG__
  </div>
  <script>
    const linkTemplate = __LINK_TEMPLATE__;
    document.querySelectorAll("#illustration g[data-tx-hash]").forEach((el) => {
      el.addEventListener("click", () => {
        const detail = {
          kind: el.getAttribute("class"),
          txHash: el.dataset.txHash,
          index: el.dataset.index,
        };
        document.dispatchEvent(new CustomEvent("txviz:click", { detail }));
        if (linkTemplate && detail.kind === "cell") {
          window.location.href = linkTemplate.replace("{tx_hash}", detail.txHash);
        }
      });
    });
  </script>
</body>
</html>
"""
    html = (
        html.replace("__TITLE__", escape(title))
        .replace("__LINK_TEMPLATE__", json.dumps(link_template).replace("</", "<\\/"))
        .replace("__SVG__", scene_to_svg(scene))
    )

    with out_path.open("w", encoding="utf-8") as f:
        f.write(html)

    return str(out_path)
