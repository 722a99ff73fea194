"""
Page-level checks run alongside the article validation: broken links,
security headers, performance timings and accessibility.
"""
