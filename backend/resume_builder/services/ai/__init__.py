"""
Configuration-driven AI task layer.

A task name resolves (``resolver``) to the defaults in ``defaults`` with any
active stored override laid on top; ``executor`` builds the prompt, calls the
model through ``client``, parses and repairs the reply; ``intent`` routes chat
messages to a task name.
"""
