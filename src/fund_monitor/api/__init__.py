"""HTTP surface handing summaries to the rendering layer."""
