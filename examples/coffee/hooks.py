"""Hook definitions for the coffee machine example; ``hooks`` is injected."""
# ruff: noqa: F821


@hooks.before_scenario
def fill_machine(event):
    event.context.beans = 100


@hooks.after_step("@audit")
def audit(event):
    event.context.audit = [*event.context.get("audit", []), event.step.text]
