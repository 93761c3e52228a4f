"""
Property Tests for Engine Idempotence.

Running the engine on its own output must reproduce that output byte for byte.
"""

from hypothesis import given, settings, strategies as st

from cue_imports.core.engine import ImportEngine
from cue_imports.core.import_fixer.stdlib import STDLIB

NAMES = ["json", "list", "math", "path", "regexp", "strconv", "strings", "time"]


def build_source(package: bool, comment: bool, used, unused) -> str:
  parts = []
  if package:
    parts.append("package p\n\n")
  if comment:
    parts.append("// notes\n")
  for name in unused:
    parts.append(f'import "{STDLIB[name]}"\n')
  if unused:
    parts.append("\n")
  for idx, name in enumerate(used):
    parts.append(f"f{idx}: {name}.X\n")
  if not used:
    parts.append("z: 1\n")
  return "".join(parts)


def test_second_run_is_a_no_op(tmp_path):
  engine = ImportEngine()
  filename = str(tmp_path / "gen.cue")

  @given(data=st.data())
  @settings(max_examples=50, deadline=None)
  def check(data):
    used = data.draw(st.lists(st.sampled_from(NAMES), unique=True, max_size=4))
    unused = data.draw(st.lists(st.sampled_from([n for n in NAMES if n not in used]), unique=True, max_size=3))
    src = build_source(data.draw(st.booleans()), data.draw(st.booleans()), used, unused)

    once = engine.run(filename, src.encode("utf-8"))
    twice = engine.run(filename, once)
    assert twice == once

    text = once.decode("utf-8")
    for name in used:
      assert f'"{STDLIB[name]}"' in text
    for name in unused:
      assert f'"{STDLIB[name]}"' not in text

  check()
