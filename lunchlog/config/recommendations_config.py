"""
Canned responses used when the completion service fails or is skipped.
Recommendation, report and image-analysis endpoints never surface AI failures;
they return these instead.
"""

# Exactly three items; every dinner recommendation response has this length.
FALLBACK_RECOMMENDATIONS = [
    {
        "name": "焼き魚定食",
        "category": "japanese",
        "reason": "バランスの良い和食でヘルシーです",
    },
    {
        "name": "野菜たっぷりスープ",
        "category": "western",
        "reason": "野菜をしっかり摂れます",
    },
    {
        "name": "豆腐ハンバーグ",
        "category": "japanese",
        "reason": "タンパク質を補給できます",
    },
]

RECOMMENDATION_COUNT = len(FALLBACK_RECOMMENDATIONS)

IMAGE_ANALYSIS_UNKNOWN_DISH = "不明な料理"
IMAGE_ANALYSIS_FAILED_DESCRIPTION = "画像の解析に失敗しました。手動で入力してください。"

NO_MEALS_ANALYSIS = "今週の食事記録がありません"

WEEKLY_REPORT_FALLBACK_ANALYSIS = "今週も食事記録を続けて、バランスの良い食生活を目指しましょう。"

NUTRITION_ADVICE_FALLBACK = {
    "analysis": "バランスの良い食生活を心がけましょう。",
    "recommendations": [
        "野菜の摂取量を増やしましょう",
        "タンパク質のバランスを考慮してください",
    ],
    "nutrition_score": 50,
}
