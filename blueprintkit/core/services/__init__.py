"""Services — blueprint generation/destruction, templating, routes patching."""
