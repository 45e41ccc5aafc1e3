"""Core framework components: configuration, logging, exceptions, scanning."""
