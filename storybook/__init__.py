"""Personalized illustrated storybook generation."""
