VERSION = "0.22.0-dev"