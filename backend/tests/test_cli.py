def test_bot_match_reports_a_winner(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['bot-match', '--bots', '3', '--seed', '4', '--strategy', 'greedy'])
    assert result.exit_code == 0, result.output
    assert ' won after ' in result.output


def test_bot_match_rejects_too_many_bots(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['bot-match', '--bots', '5'])
    assert result.exit_code != 0
