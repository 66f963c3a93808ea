"""Local-SEO snapshot scoring for business audits."""
