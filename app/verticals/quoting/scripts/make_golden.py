import json
from pathlib import Path

from app.verticals.quoting.service import calculate_quote_v1

ROOT = Path(__file__).resolve().parents[1]

fixtures = ROOT / "tests" / "fixtures"
golden = ROOT / "tests" / "golden" / "quote_v1.json"

inp = json.loads((fixtures / "input.v1.sample.json").read_text(encoding="utf-8"))
out = calculate_quote_v1(inp)

golden.write_text(
    json.dumps(out.payload, indent=2, ensure_ascii=False, sort_keys=True) + "\n",
    encoding="utf-8",
)

print("Wrote tests/golden/quote_v1.json")
