"""
Optimization engine: classifies each channel's competitive position and
turns it into an INCREASE / MAINTAIN / ADD / DECREASE budget recommendation
with a priority and a short reason.

Modules
-------
status : calculate_status() + is_opportunity() + filter_relevant_channels()
         — pure functions over a single ChannelRecord, no I/O.
engine : get_protected_channels() + intensity_cutoffs() + run_optimization()
         — the rule table, evaluated fresh on every call.
"""
