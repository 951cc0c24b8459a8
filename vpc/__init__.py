"""vpc: deploy to Vercel from CI and announce the preview on GitHub."""
