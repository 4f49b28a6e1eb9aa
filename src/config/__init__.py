"""Shipped YAML configuration: gpio.yaml and factory_defaults.yaml (see ConfigManager)"""
