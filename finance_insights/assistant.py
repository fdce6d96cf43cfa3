"""AI chat collaborator for the insights page.

The assistant serializes the derived numbers of a :class:`FinancialSnapshot`
into a prompt and sends it to an OpenAI-compatible chat completions endpoint
(Groq by default). A request is attempted once; when no API key is
configured or the call fails for any transport, status or parse reason, a
local template answer built from the same numbers is returned instead.

Example:
    >>> assistant = FinancialAssistant(AISettings(api_key=None))
    >>> reply = assistant.reply('How should I allocate my balance?', {'total_balance': 10000})
    >>> reply.data_used
    'fallback'
"""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from .config import get_keywords
from .finance_analytics import to_float
from .lib.common.formatting import format_currency, format_percent
from .models import AIPreferences
from .settings import AISettings, get_currency_symbol, load_ai_settings
from .snapshot import FinancialSnapshot

logger = logging.getLogger(__name__)

DEFAULT_HYPOTHETICAL_KEYWORDS = (
    'what if',
    'if my',
    'suppose',
    'assuming',
    'hypothetically',
    "let's say",
    'imagine',
    'if i had',
    'if i have',
    'if my balance',
    'if my income',
    'if i earn',
    'if i spend',
)

_AMOUNT = r'(\d+(?:,\d{3})*)'
BALANCE_PATTERN = re.compile(r'balance.*?' + _AMOUNT, re.IGNORECASE)
INCOME_PATTERN = re.compile(r'income.*?' + _AMOUNT, re.IGNORECASE)
EXPENSE_PATTERN = re.compile(r'expens.*?' + _AMOUNT, re.IGNORECASE)

HISTORY_WINDOW = 3

SYSTEM_PROMPT = """You are an expert financial advisor assistant for an expense tracking app.

CORE PRINCIPLES:
- Always express amounts in the user's currency ({currency})
- Provide specific, actionable advice
- Be conversational but professional
- Give personalized recommendations based on the user's data

RESPONSE STYLE:
- Start with a direct answer to their question
- Use bullet points for clarity
- Include specific amounts
- Provide 2-3 actionable next steps

HYPOTHETICAL SCENARIOS:
- If the user asks "what if" or gives hypothetical numbers, use those numbers
- Clearly acknowledge you're working with their hypothetical scenario
- Don't reference their actual data when answering hypothetical questions

FINANCIAL EXPERTISE:
- 50/30/20 rule applications
- Emergency fund recommendations (3-6 months expenses)
- Debt management strategies
- Goal-based financial planning"""


class CompletionError(Exception):
    """The completion endpoint answered with something that isn't a reply."""


@dataclass
class AssistantReply:
    message: str
    is_hypothetical: bool = False
    data_used: str = 'actual'


# --------------------
# Context and prompt
# --------------------
def build_financial_context(
    snapshot: FinancialSnapshot,
    preferences: Optional[AIPreferences] = None,
) -> Dict[str, Any]:
    """Serializable dict of the derived numbers the assistant may see.

    Fields the user has not granted access to are present with a ``None``
    value so the prompt shape stays the same.
    """
    preferences = preferences or AIPreferences()
    access = preferences.data_access
    personal = preferences.personalization
    month = snapshot.current_month
    salary = snapshot.salary_profile

    def _gate(allowed: bool, value: Any) -> Any:
        return value if allowed else None

    context: Dict[str, Any] = {
        'monthly_income': _gate(access.transactions, month.income),
        'monthly_expenses': _gate(access.transactions, month.expenses),
        'monthly_savings': _gate(access.transactions, month.savings),
        'total_income': _gate(access.transactions, snapshot.totals.income),
        'total_expenses': _gate(access.transactions, snapshot.totals.expenses),
        'total_balance': _gate(access.wallets, snapshot.total_balance),
        'savings_rate': _gate(access.transactions, snapshot.totals.savings_rate),
        'goals': _gate(access.goals, snapshot.goal_count),
        'wallets': _gate(access.wallets, snapshot.wallet_count),
        'budgets': _gate(access.budgets, len(snapshot.budget_statuses)),
        'risk_tolerance': personal.risk_tolerance,
        'financial_goals': list(personal.financial_goals),
        'savings_target': personal.savings_target,
        'average_monthly_salary': _gate(access.transactions, salary.monthly_average),
        'current_month_salary': _gate(access.transactions, salary.current_month_amount),
        'salary_growth_rate': _gate(access.transactions, salary.growth_rate_percent),
        'months_with_salary_data': _gate(access.transactions, salary.months_observed),
        'salary_stability': _gate(access.transactions, 'stable' if salary.is_stable else 'irregular'),
        'last_6_months_salary': _gate(
            access.transactions,
            [{'month': entry.month, 'amount': entry.amount} for entry in salary.last_6_months],
        ),
    }

    if access.categories and access.transactions:
        context['top_categories'] = [[total.name, total.amount] for total in snapshot.category_totals[:3]]

    return context


def detect_hypothetical(query: str, keywords: Optional[Sequence[str]] = None) -> bool:
    """True when the query reads as a "what if" scenario."""
    keywords = keywords or get_keywords('hypothetical') or DEFAULT_HYPOTHETICAL_KEYWORDS
    lowered = (query or '').lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def _parse_amount(match: Optional['re.Match[str]']) -> Optional[int]:
    if match is None:
        return None
    return int(match.group(1).replace(',', ''))


def extract_hypothetical_data(query: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``data`` with any balance/income/expense figures in the query applied.

    Example:
        >>> extract_hypothetical_data('What if my balance was 100,000?', {})['total_balance']
        100000
    """
    scenario = dict(data)

    balance = _parse_amount(BALANCE_PATTERN.search(query or ''))
    if balance is not None:
        scenario['total_balance'] = balance
        scenario['hypothetical_balance'] = balance

    income = _parse_amount(INCOME_PATTERN.search(query or ''))
    if income is not None:
        scenario['monthly_income'] = income
        scenario['total_income'] = income

    expenses = _parse_amount(EXPENSE_PATTERN.search(query or ''))
    if expenses is not None:
        scenario['monthly_expenses'] = expenses
        scenario['total_expenses'] = expenses

    return scenario


def build_prompt(
    query: str,
    data: Mapping[str, Any],
    preferences: Optional[AIPreferences] = None,
    history: Optional[Sequence[Mapping[str, Any]]] = None,
    hypothetical: bool = False,
) -> str:
    """User prompt carrying the query, the data and the recent conversation.

    ``history`` items are mappings with ``role`` and ``message`` keys; only
    the last few are included.
    """
    preferences = preferences or AIPreferences()
    prefs = {
        'insights': dataclasses.asdict(preferences.insights),
        'personalization': dataclasses.asdict(preferences.personalization),
    }

    if hypothetical:
        data_block = f"HYPOTHETICAL SCENARIO DETECTED:\nWorking with hypothetical data: {json.dumps(data, indent=2)}"
    else:
        data_block = f"CURRENT FINANCIAL DATA:\n{json.dumps(data, indent=2)}"

    parts = [f'User Query: "{query}"', data_block, f"USER PREFERENCES:\n{json.dumps(prefs, indent=2)}"]
    if history:
        lines = [f"{item.get('role', 'user')}: {item.get('message', '')}" for item in history[-HISTORY_WINDOW:]]
        parts.append("RECENT CONVERSATION:\n" + "\n".join(lines))
    parts.append(
        "Provide a helpful, specific response that directly addresses their question using the "
        f"{'hypothetical' if hypothetical else 'actual'} financial data."
    )
    return "\n\n".join(parts)


# --------------------
# Fallback templates
# --------------------
def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def fallback_response(query: str, data: Mapping[str, Any]) -> str:
    """Template answer built from the same numbers the prompt would carry."""
    lowered = (query or '').lower()
    hypothetical = detect_hypothetical(query)
    values = extract_hypothetical_data(query, data) if hypothetical else dict(data)

    income = to_float(values.get('total_income'))
    expenses = abs(to_float(values.get('total_expenses')))
    savings_rate = to_float(values.get('savings_rate'))
    goals = int(to_float(values.get('goals')))
    wallets = int(to_float(values.get('wallets')))
    balance = to_float(values.get('hypothetical_balance')) or to_float(values.get('total_balance'))

    if 'allocate' in lowered or '50/30/20' in lowered or 'balance' in lowered:
        opener = (
            f"For your hypothetical balance of {format_currency(balance)}"
            if hypothetical
            else f"With your current balance of {format_currency(balance)}"
        )
        return f"""{opener}, here's a smart allocation strategy:

**PRIORITY-BASED ALLOCATION:**

**Emergency Fund (40% - {format_currency(balance * 0.4)})**
- Keep in your most accessible account
- Covers unexpected expenses and emergencies

**Goal Progress (30% - {format_currency(balance * 0.3)})**
- Add to your highest priority financial goal
- Consider automated transfers

**Next Month Buffer (20% - {format_currency(balance * 0.2)})**
- Keep in your main spending account
- Helps you start next month ahead

**Growth/Investment (10% - {format_currency(balance * 0.1)})**
- High-yield savings or time deposit
- Let your money work for you

**NEXT STEPS:**
1. Move the emergency fund to a separate savings account
2. Set up automatic goal contributions
3. Research investment options at your bank

Would you like specific recommendations for any of these categories?"""

    if 'budget' in lowered or 'spending' in lowered:
        return f"""Based on your {'hypothetical scenario' if hypothetical else 'current situation'}, here's your spending analysis:

**SPENDING BREAKDOWN:**
- Total Balance: {format_currency(balance)}
- Monthly Expenses: {format_currency(expenses)}
- Savings Rate: {format_percent(savings_rate)}

**BUDGET RECOMMENDATIONS:**
1. **50/30/20 Rule Application:**
   - Needs: {format_currency(income * 0.5)}
   - Wants: {format_currency(income * 0.3)}
   - Savings: {format_currency(income * 0.2)}

2. **Quick Wins:**
   - Track daily expenses using this app
   - Set category budgets for top spending areas
   - Use the envelope method for discretionary spending

**ACTION PLAN:**
1. Set up category budgets in the app
2. Review and adjust weekly
3. Celebrate small wins to stay motivated"""

    if 'save' in lowered or 'goal' in lowered:
        return f"""{'For your hypothetical scenario' if hypothetical else 'Based on your current data'}, here's your savings strategy:

**SAVINGS OPTIMIZATION:**
- Current Balance: {format_currency(balance)}
- Active Goals: {_plural(goals, 'goal')}
- Savings Rate: {format_percent(savings_rate)}

**SAVINGS STRATEGIES:**
1. **Automate Everything:**
   - Set up automatic transfers on payday
   - Use separate savings accounts for each goal

2. **Boost Your Savings:**
   - Save {format_currency(balance * 0.1)} monthly (10% of balance)
   - Round up purchases and save the difference

3. **Goal-Based Approach:**
   - Emergency Fund: {format_currency(expenses * 3)} (3 months expenses)
   - Vacation Fund: {format_currency(balance * 0.2)}
   - Investment Fund: {format_currency(balance * 0.15)}

**NEXT STEPS:**
1. Open a high-yield savings account
2. Set up automatic transfers
3. Track progress weekly in this app"""

    if 'invest' in lowered:
        return f"""{'With your hypothetical balance' if hypothetical else 'With your current balance'} of {format_currency(balance)}, here are investment options:

**Beginner-Friendly ({format_currency(balance * 0.3)}):**
- Time deposits
- Money market funds
- Government bonds

**Moderate Risk ({format_currency(balance * 0.4)}):**
- Balanced funds
- Mutual funds
- Blue-chip stocks

**Growth-Oriented ({format_currency(balance * 0.3)}):**
- Index funds
- Equity mutual funds
- REITs

**INVESTMENT RULES:**
1. Only invest money you won't need for 5+ years
2. Start with 10-20% of your balance
3. Diversify across different asset classes

Ready to start your investment journey?"""

    opener = (
        f"For your hypothetical scenario with {format_currency(balance)}"
        if hypothetical
        else f"With your current balance of {format_currency(balance)}"
    )
    return f"""I understand you're asking about your finances. {opener}, here's what I recommend:

**QUICK FINANCIAL SNAPSHOT:**
- Balance: {format_currency(balance)}
- Wallets: {_plural(wallets, 'account')}
- Goals: {_plural(goals, 'active goal')}
- Savings Rate: {format_percent(savings_rate)}

**IMMEDIATE ACTIONS:**
1. **Emergency Fund**: Aim for {format_currency(balance * 0.3)} (30% of balance)
2. **Goal Funding**: Allocate {format_currency(balance * 0.4)} to your priorities
3. **Growth**: Invest {format_currency(balance * 0.2)} for long-term wealth

What specific area would you like me to dive deeper into - budgeting, saving strategies, investment options, or debt management?"""


# --------------------
# Completion client
# --------------------
class ChatCompletionClient:
    """Thin client for an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(self, settings: AISettings, transport: Optional[httpx.BaseTransport] = None):
        self._settings = settings
        self._base_url = settings.base_url.rstrip('/')
        self._transport = transport

    @property
    def model_name(self) -> str:
        return self._settings.model

    def complete(self, system: str, prompt: str) -> str:
        """Send one request and return the first choice's text.

        Raises:
            httpx.HTTPError: On transport failures and non-2xx responses
            CompletionError: When the response body has no usable reply
        """
        payload = {
            'model': self._settings.model,
            'messages': [
                {'role': 'system', 'content': system},
                {'role': 'user', 'content': prompt},
            ],
            'temperature': 0.7,
        }
        headers = {'Authorization': f"Bearer {self._settings.api_key}"}
        timeout = httpx.Timeout(self._settings.timeout, connect=5.0)

        with httpx.Client(timeout=timeout, transport=self._transport) as client:
            response = client.post(f"{self._base_url}/chat/completions", json=payload, headers=headers)
            response.raise_for_status()
            try:
                data = response.json()
                text = data['choices'][0]['message']['content']
            except (ValueError, KeyError, IndexError, TypeError) as e:
                raise CompletionError(f"Malformed completion response: {e!r}") from e

        if not isinstance(text, str) or not text.strip():
            raise CompletionError("Completion response had no content")
        return text


class FinancialAssistant:
    """Single-attempt chat assistant with a local template fallback."""

    def __init__(self, settings: Optional[AISettings] = None, client: Optional[ChatCompletionClient] = None):
        self._settings = settings or load_ai_settings()
        self._client = client or ChatCompletionClient(self._settings)

    def reply(
        self,
        query: str,
        context: Mapping[str, Any],
        history: Optional[Sequence[Mapping[str, Any]]] = None,
        preferences: Optional[AIPreferences] = None,
    ) -> AssistantReply:
        hypothetical = detect_hypothetical(query)
        data = extract_hypothetical_data(query, context) if hypothetical else dict(context)

        if not self._settings.enabled:
            logger.info("No completion API key configured; answering from templates")
            return self._fallback(query, context)

        prompt = build_prompt(query, data, preferences, history, hypothetical)
        logger.debug("AI Prompt:\n%s", prompt)
        try:
            text = self._client.complete(SYSTEM_PROMPT.format(currency=get_currency_symbol()), prompt)
        except (httpx.HTTPError, CompletionError) as e:
            self._log_completion_error(e)
            return self._fallback(query, context)

        logger.debug("AI Response: %s", text)
        return AssistantReply(
            message=text,
            is_hypothetical=hypothetical,
            data_used='hypothetical' if hypothetical else 'actual',
        )

    def _fallback(self, query: str, context: Mapping[str, Any]) -> AssistantReply:
        return AssistantReply(
            message=fallback_response(query, context),
            is_hypothetical=detect_hypothetical(query),
            data_used='fallback',
        )

    def _log_completion_error(self, e: Exception) -> None:
        if isinstance(e, httpx.TimeoutException):
            logger.warning("Completion request timed out after %.1fs", self._settings.timeout)
        elif isinstance(e, httpx.ConnectError):
            logger.warning("Could not connect to completion endpoint at %s", self._settings.base_url)
        elif isinstance(e, httpx.HTTPStatusError):
            logger.warning("Completion endpoint returned HTTP %s", e.response.status_code)
        else:
            logger.warning("AI reply failed: %s (type: %s)", str(e) or repr(e), type(e).__name__)

