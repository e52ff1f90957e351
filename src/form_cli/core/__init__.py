"""
Form core: schema resolution, data binding, subjects, deltas and dispatch.

Session orchestration lives in `form_cli.core.session`.
"""
