"""GraphQL documents sent to the LeetCode public API."""

USER_PROFILE_QUERY = """
  query userPublicProfile($username: String!) {
    matchedUser(username: $username) {
      username
      profile {
        realName
        userAvatar
        ranking
        countryName
        reputation
        aboutMe
        school
        websites
        skillTags
        company
        jobTitle
      }
      submitStatsGlobal {
        acSubmissionNum {
          difficulty
          count
          submissions
        }
        totalSubmissionNum {
          difficulty
          count
          submissions
        }
      }
    }
    userContestRanking(username: $username) {
      attendedContestsCount
      rating
      globalRanking
      topPercentage
      badge {
        name
        expired
        hoverText
        icon
      }
    }
    userContestRankingHistory(username: $username) {
      attended
      trendDirection
      problemsSolved
      totalProblems
      finishTimeInSeconds
      rating
      ranking
      contest {
        title
        startTime
      }
    }
  }
"""

LANGUAGE_STATS_QUERY = """
  query languageStats($username: String!) {
    matchedUser(username: $username) {
      languageProblemCount {
        languageName
        problemsSolved
      }
    }
  }
"""

USER_CALENDAR_QUERY = """
  query userProfileCalendar($username: String!, $year: Int) {
    matchedUser(username: $username) {
      userCalendar(year: $year) {
        activeYears
        streak
        totalActiveDays
        submissionCalendar
      }
    }
  }
"""

__all__ = ["LANGUAGE_STATS_QUERY", "USER_CALENDAR_QUERY", "USER_PROFILE_QUERY"]
