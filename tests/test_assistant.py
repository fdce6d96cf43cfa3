import json
import logging
from datetime import date

import httpx
import pytest

from finance_insights.assistant import (
    ChatCompletionClient,
    FinancialAssistant,
    build_financial_context,
    build_prompt,
    detect_hypothetical,
    extract_hypothetical_data,
    fallback_response,
)
from finance_insights.models import AIPreferences, Wallet
from finance_insights.settings import AISettings
from finance_insights.snapshot import build_snapshot

SETTINGS = AISettings(api_key='test-key', model='test-model', base_url='https://llm.example/v1', timeout=5.0)

CONTEXT = {
    'total_income': 50000,
    'total_expenses': 30000,
    'total_balance': 10000,
    'savings_rate': 40.0,
    'goals': 1,
    'wallets': 2,
}


def _assistant(handler):
    client = ChatCompletionClient(SETTINGS, transport=httpx.MockTransport(handler))
    return FinancialAssistant(SETTINGS, client)


def _ok(text):
    return httpx.Response(200, json={'choices': [{'message': {'role': 'assistant', 'content': text}}]})


def test_detect_hypothetical():
    assert detect_hypothetical('What if I doubled my savings?')
    assert detect_hypothetical("Let's say I earn more")
    assert not detect_hypothetical('How am I doing this month?')


def test_extract_hypothetical_figures():
    data = extract_hypothetical_data(
        'What if my balance was 100,000 and my income 50,000 with expenses of 20,000?',
        {'total_balance': 1, 'savings_rate': 12.0},
    )
    assert data['total_balance'] == 100000
    assert data['hypothetical_balance'] == 100000
    assert data['total_income'] == data['monthly_income'] == 50000
    assert data['total_expenses'] == data['monthly_expenses'] == 20000
    assert data['savings_rate'] == 12.0


def test_fallback_allocation_uses_balance():
    message = fallback_response('How should I allocate my money?', CONTEXT)
    assert 'current balance' in message
    assert '4,000' in message
    assert '1,000' in message


def test_fallback_templates_follow_keywords():
    assert 'SPENDING BREAKDOWN' in fallback_response('Help with my budget', CONTEXT)
    assert 'SAVINGS OPTIMIZATION' in fallback_response('How do I save more?', CONTEXT)
    assert 'investment options' in fallback_response('Where should I invest?', CONTEXT)
    default = fallback_response('Hello there', CONTEXT)
    assert '2 accounts' in default
    assert '1 active goal\n' in default


def test_fallback_handles_gated_values():
    message = fallback_response('Hello', {'total_balance': None, 'goals': None, 'savings_rate': None})
    assert '0.0%' in message


def test_successful_reply():
    seen = {}

    def handler(request):
        seen['url'] = str(request.url)
        seen['auth'] = request.headers['Authorization']
        seen['body'] = json.loads(request.content)
        return _ok('Keep saving 20% of your income.')

    reply = _assistant(handler).reply('How am I doing?', CONTEXT, history=[{'role': 'user', 'message': 'hi'}])

    assert reply.message == 'Keep saving 20% of your income.'
    assert reply.data_used == 'actual'
    assert not reply.is_hypothetical
    assert seen['url'] == 'https://llm.example/v1/chat/completions'
    assert seen['auth'] == 'Bearer test-key'
    assert seen['body']['model'] == 'test-model'
    prompt = seen['body']['messages'][1]['content']
    assert 'CURRENT FINANCIAL DATA' in prompt
    assert 'user: hi' in prompt


def test_hypothetical_reply_sends_scenario():
    prompts = []

    def handler(request):
        prompts.append(json.loads(request.content)['messages'][1]['content'])
        return _ok('Sure.')

    reply = _assistant(handler).reply('What if my balance was 200,000?', CONTEXT)
    assert reply.is_hypothetical
    assert reply.data_used == 'hypothetical'
    assert 'HYPOTHETICAL SCENARIO DETECTED' in prompts[0]
    assert '200000' in prompts[0]


@pytest.mark.parametrize(
    'response',
    [
        httpx.Response(500, json={'error': 'boom'}),
        httpx.Response(200, content=b'not json'),
        httpx.Response(200, json={'choices': []}),
        httpx.Response(200, json={'choices': [{'message': {'content': '   '}}]}),
    ],
)
def test_failures_fall_back_to_templates(response, caplog):
    with caplog.at_level(logging.WARNING, logger='finance_insights.assistant'):
        reply = _assistant(lambda request: response).reply('How should I allocate my balance?', CONTEXT)

    assert reply.data_used == 'fallback'
    assert 'PRIORITY-BASED ALLOCATION' in reply.message
    assert caplog.records


def test_transport_error_falls_back():
    def handler(request):
        raise httpx.ConnectError('refused', request=request)

    reply = _assistant(handler).reply('Hello', CONTEXT)
    assert reply.data_used == 'fallback'


def test_missing_api_key_never_calls_endpoint():
    calls = []

    def handler(request):
        calls.append(request)
        return _ok('unused')

    settings = AISettings(api_key=None)
    assistant = FinancialAssistant(settings, ChatCompletionClient(settings, transport=httpx.MockTransport(handler)))
    reply = assistant.reply('Hello', CONTEXT)

    assert reply.data_used == 'fallback'
    assert calls == []


def test_context_respects_data_access():
    snapshot = build_snapshot(
        [{'amount': 50000, 'type': 'income', 'date': '2024-06-01', 'description': 'Salary'}],
        wallets=[Wallet('w1', 'Bank', balance=1000)],
        as_of=date(2024, 6, 30),
    )
    preferences = AIPreferences.from_dict({'data_access': {'wallets': False}})
    context = build_financial_context(snapshot, preferences)

    assert context['total_balance'] is None
    assert context['wallets'] is None
    assert context['monthly_income'] == 50000
    assert context['average_monthly_salary'] == 50000
    assert context['salary_stability'] == 'irregular'
    assert context['top_categories'] == []
    json.dumps(context)


def test_build_prompt_includes_preferences():
    prompt = build_prompt('Hi', {'total_balance': 5}, AIPreferences())
    assert 'USER PREFERENCES' in prompt
    assert '"savings_target": 20.0' in prompt
    assert 'RECENT CONVERSATION' not in prompt
