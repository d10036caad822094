"""Journal prompt service.

Accepts free-text journal entries over HTTP, wraps them in a fixed instruction
prompt for a text-generation model and returns the JSON object recovered from
the model's reply.
"""
