#!/usr/bin/env python3
"""
Navigator Demo: Content → Validation → Scripted Walk → Diagram

Shows the full workflow:
1. Load the built-in coding and Git help tree
2. Validate it
3. Walk a path, switch language, go back
4. Write a Graphviz diagram
"""

from lifeline.backends import DotMode, save_dot_file
from lifeline.content import build_default_content
from lifeline.engine import NavigationEngine, QuestionView, ResultView
from lifeline.storage import MemoryStore
from lifeline.validation import validate_content


def show(view):
    if isinstance(view, QuestionView):
        print(f"   ? {view.question}")
        for i, opt in enumerate(view.options):
            print(f"       [{i}] {opt.text} -> {opt.next}")
    elif isinstance(view, ResultView):
        print(f"   ! {view.title} (back {'on' if view.back_enabled else 'off'})")
    else:
        print("   . intro")


def main():
    print("=" * 80)
    print("NAVIGATOR DEMO")
    print("=" * 80)

    print("\n1. LOADING CONTENT...")
    content = build_default_content()
    print(f"   ✓ Loaded {content.name}: {len(content)} nodes")

    print("\n2. VALIDATING...")
    report = validate_content(content)
    print(f"   ✓ Valid: {report.is_valid}")
    print(f"   ✓ Languages: {report.languages}")

    print("\n3. WALKING...")
    engine = NavigationEngine(content, store=MemoryStore())
    show(engine.start())
    show(engine.start_path("general"))
    show(engine.choose(0))
    show(engine.set_language("csharp"))
    show(engine.go_back())
    print(f"   history={engine.state.history} current={engine.state.current_id}")

    print("\n4. GENERATING DIAGRAM...")
    save_dot_file(content, "lifeline_detailed.dot", mode=DotMode.DETAILED)
    print("   ✓ Saved lifeline_detailed.dot")
    print("   dot -Tpng lifeline_detailed.dot -o lifeline.png")
    print("=" * 80)


if __name__ == "__main__":
    main()
