"""Restaurant menu crawler: page extraction core and crawl plumbing."""
