"""Terminal transcript viewer for a Slack workspace's real-time event stream."""
