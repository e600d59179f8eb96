"""LeetCode public profile aggregation proxy."""
