# tests/test_search_strings.py
"""
Tests for search string generation and the AI provider client.
"""

from unittest import mock

import pytest
from openai import OpenAIError

from mira_portal.errors import UpstreamError
from mira_portal.extensions import db
from mira_portal.models import SearchString
from mira_portal.services.ai_client import chat_completion
from mira_portal.services.search_strings import (
    LEAD_GENERATION_SUFFIX, RECRUITING_SUFFIX, build_basic_search_string, generate_search_string,
)
from tests.conftest import location


class TestKeywordHeuristic:

    def test_recruiting_groups_titles_locations_and_skills(self):
        result = build_basic_search_string('Senior Python Developer in Berlin', 'recruiting')
        assert result == '(Senior OR Developer) AND Berlin AND Python' + RECRUITING_SUFFIX

    def test_lead_generation_uses_skills_and_locations(self):
        result = build_basic_search_string('Cloud software for logistics companies in Hamburg', 'lead_generation')
        assert result == 'Cloud AND Hamburg' + LEAD_GENERATION_SUFFIX

    def test_other_words_fill_in(self):
        result = build_basic_search_string('Lorem ipsum dolor sit amet', 'recruiting')
        assert result == '(Lorem OR ipsum OR dolor OR amet)' + RECRUITING_SUFFIX

    def test_stopwords_and_repeats_are_dropped(self):
        result = build_basic_search_string('Python python with Python', 'lead_generation')
        assert result == 'Python' + LEAD_GENERATION_SUFFIX


@pytest.fixture
def record(app_ctx, make_user):
    user = make_user('customer@example.com')
    record = SearchString(user_id=user.id, type='recruiting', input_text='Senior Python Developer in Berlin')
    db.session.add(record)
    db.session.commit()
    return record


def test_generation_uses_the_ai_answer(record):
    with mock.patch('mira_portal.services.search_strings.chat_completion',
                    return_value='"Python Developer" AND Berlin'):
        generate_search_string(record)

    assert record.status == 'completed'
    assert record.generated_string == '"Python Developer" AND Berlin'


def test_generation_falls_back_to_keywords_without_provider(record):
    generate_search_string(record)

    assert record.status == 'completed'
    assert record.generated_string.startswith('(Senior OR Developer) AND Berlin')


def test_generation_without_input_fails(record):
    record.input_text = None
    generate_search_string(record)

    assert record.status == 'failed'
    assert record.generated_string is None


class TestChatCompletion:

    def test_returns_stripped_answer(self, app_ctx):
        app_ctx.config['OPENAI_API_KEY'] = 'sk-test'
        completion = mock.Mock()
        completion.choices = [mock.Mock(message=mock.Mock(content='  an answer \n'))]

        with mock.patch('mira_portal.services.ai_client.OpenAI') as client_class:
            client_class.return_value.chat.completions.create.return_value = completion
            answer = chat_completion([{'role': 'user', 'content': 'hi'}])

        assert answer == 'an answer'
        kwargs = client_class.return_value.chat.completions.create.call_args.kwargs
        assert kwargs['model'] == 'gpt-4o-mini'
        assert kwargs['max_tokens'] == 300

    def test_provider_errors_become_upstream_errors(self, app_ctx):
        app_ctx.config['OPENAI_API_KEY'] = 'sk-test'

        with mock.patch('mira_portal.services.ai_client.OpenAI') as client_class:
            client_class.return_value.chat.completions.create.side_effect = OpenAIError('rate limited')
            with pytest.raises(UpstreamError) as excinfo:
                chat_completion([{'role': 'user', 'content': 'hi'}])

        assert excinfo.value.details == 'rate limited'

    def test_missing_key(self, app_ctx):
        with pytest.raises(UpstreamError):
            chat_completion([{'role': 'user', 'content': 'hi'}])


def test_customer_creates_search_string_from_text(app, client, make_user, login):
    with app.app_context():
        make_user('customer@example.com')
    login('customer@example.com')

    response = client.post('/customer/search-strings/create', data={
        'type': 'recruiting',
        'input_text': 'Senior Python Developer in Berlin',
    })

    assert location(response) == '/customer/search-strings'
    with app.app_context():
        record = SearchString.query.one()
        assert record.status == 'completed'
        assert record.input_source == 'text'
        assert record.company_id is not None

    page = client.get('/customer/search-strings')
    assert b'Senior OR Developer' in page.data


def test_customer_creates_search_string_from_website(app, client, make_user, login):
    with app.app_context():
        make_user('customer@example.com')
    login('customer@example.com')

    scraped = {'success': True, 'text': 'Senior Python Developer in Berlin', 'domain': 'example.com',
               'url': 'https://example.com'}
    with mock.patch('mira_portal.routes.customer.scrape_website', return_value=scraped):
        client.post('/customer/search-strings/create', data={
            'type': 'lead_generation', 'input_url': 'example.com',
        })

    with app.app_context():
        record = SearchString.query.one()
        assert record.input_source == 'website'
        assert record.input_url == 'https://example.com'
        assert record.type == 'lead_generation'
