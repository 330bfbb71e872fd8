"""Ambient infrastructure shared by every natdoc stage: errors, logging, config."""
