"""HTTP API for the Storybook Generator."""
