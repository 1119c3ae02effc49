# utils/prompts.py

"""
Prompt builders for the Gemini requests.

Every builder returns plain text; the response format is described inline
as a JSON example so the model answers with a single object.
"""

import json

SHOPPING_LIST_INSTRUCTION = (
    "Você é um nutricionista especialista e assistente de compras. Sua função é gerar uma lista "
    "de compras otimizada e estruturada em formato JSON, com base nas informações fornecidas. "
    "A lista deve ser prática, organizada por categorias e adequada para o número de pessoas e "
    "período informados. Não adicione nenhum texto ou formatação fora do JSON."
)

MEAL_PLAN_FROM_LIST_INSTRUCTION = (
    "Você é um nutricionista experiente. Sua tarefa é criar um plano alimentar detalhado para "
    "múltiplas pessoas, usando APENAS os ingredientes de uma lista de compras fornecida. O plano "
    "deve ser estruturado em JSON e personalizado para cada indivíduo."
)


def describe_people(people):
    """One line per person; the TMB sentence is added only when it was informed"""
    lines = []
    for index, person in enumerate(people):
        line = (
            f"Pessoa {index + 1}: Gênero {person.get('gender')}, {person.get('weight')}kg, "
            f"{person.get('height')}cm, {person.get('age')} anos."
        )
        tmb = str(person.get('tmb') or '').strip()
        if tmb:
            line += f" TMB de {tmb} kcal."
        lines.append(line)
    return '\n'.join(lines)


def build_nutrition_plan_prompt(patient_name, max_calories, meal_type, macro_priority,
                                selected_foods, observations=''):
    """Create the prompt for a single-patient plan restricted to the selected foods"""
    foods = ', '.join(selected_foods)
    prompt = f"""Você é um nutricionista especialista. Crie um plano alimentar para o paciente "{patient_name}".

**Restrições e Preferências:**
- Calorias Máximas: {max_calories}
- Tipo de Refeição: {meal_type}
- Prioridade de Macronutriente: {macro_priority}
- Alimentos Disponíveis: {foods}

**Formato da Resposta (JSON):**
Responda estritamente com um objeto JSON com a seguinte estrutura:
{{
  "meals": [
    {{
      "type": "breakfast" | "lunch" | "dinner" | "snack",
      "foods": [
        {{
          "name": "Nome do Alimento",
          "quantity": "Quantidade (ex: 100g)",
          "calories": numero_de_calorias
        }}
      ]
    }}
  ]
}}

**Instruções Adicionais:**
- O total de calorias do plano não deve exceder {max_calories}.
- Utilize apenas os alimentos fornecidos na lista de "Alimentos Disponíveis".
- Se o tipo de refeição for "all", crie um plano para o dia todo (café da manhã, almoço, lanche, jantar).
- Se for um tipo de refeição específico, crie apenas para essa refeição."""

    observations = (observations or '').strip()
    if observations:
        prompt += f"\n\n**Observações Complementares:**\n{observations}"
    return prompt


def build_shopping_list_prompt(objective, people, time_period):
    people_details = describe_people(people)
    return f"""Gere uma lista de compras para {len(people)} pessoa(s) para um período de {time_period}.

**Informações:**
- **Objetivo Principal:** {objective}.
- **Período:** {time_period}.
- **Detalhes das Pessoas:**
{people_details}

**Instrução:** Se a TMB (Taxa Metabólica Basal) for fornecida para uma pessoa, use essa informação para estimar com mais precisão as quantidades de alimentos necessários para atingir seus objetivos calóricos. Se não for fornecida, estime com base nas outras características.

**Regras Estritas:**
1. **Culinária Brasileira:** Baseie a lista em alimentos comuns e acessíveis no Brasil.
2. **Organização:** Organize a lista de compras por categorias (ex: "Frutas", "Vegetais", "Proteínas", "Grãos e Cereais", "Laticínios", "Outros").
3. **Quantidades:** As quantidades devem ser estimadas para o número de pessoas e o período de tempo especificado. Use unidades de medida comuns (ex: kg, g, unidades, litros, etc.).
4. **JSON Válido:** A saída DEVE ser um objeto JSON válido, começando com "{{" e terminando com "}}". Não inclua nenhum texto ou formatação fora do JSON.

**Formato de Saída (JSON):**
{{
  "lista_de_compras": [
    {{
      "categoria": "<Nome da Categoria>",
      "itens": [
        {{
          "item": "<Nome do Alimento>",
          "quantidade": "<Quantidade estimada, ex: '2kg' ou '5 unidades'>"
        }}
      ]
    }}
  ],
  "observacoes": "<Uma breve observação sobre a lista, como sugestões de economia ou armazenamento.>"
}}"""


def build_meal_plan_from_list_prompt(shopping_list, people, time_period, objective):
    """Create the prompt for a per-person plan that only uses the shopping list items"""
    people_details = describe_people(people)
    shopping_list_text = json.dumps(shopping_list.get('lista_de_compras', []), indent=2, ensure_ascii=False)
    return f"""**Objetivo:** Criar um plano alimentar para {len(people)} pessoa(s) durante {time_period}.

**Contexto:**
- **Objetivo Geral:** {objective}.
- **Período:** {time_period}.
- **Indivíduos:**
{people_details}

**Recurso Exclusivo (Lista de Compras):**
Utilize SOMENTE os itens da lista de compras abaixo. Seja criativo para combinar os ingredientes e evitar desperdício.
```json
{shopping_list_text}
```

**Regras Estritas:**
1. **Restrição de Ingredientes:** NÃO use nenhum ingrediente que não esteja na lista de compras fornecida.
2. **Plano Individual:** Crie um plano alimentar separado para cada pessoa, ajustando as porções e calorias de acordo com suas características (peso, altura, idade, gênero) e o objetivo principal.
3. **Regra da TMB (MAIS IMPORTANTE):** Se a TMB de uma pessoa for fornecida, o total de calorias diárias do plano alimentar para essa pessoa DEVE ficar entre 85% e 105% do valor da TMB. Por exemplo, para uma TMB de 2000 kcal, o plano diário deve ter entre 1700 e 2100 kcal. Calcule e inclua o total de calorias diárias no JSON. Se a TMB não for fornecida, estime as calorias com base no objetivo e nas características físicas.
4. **Estrutura Diária:** Para cada dia, detalhe as refeições (Café da Manhã, Lanche da Manhã, Almoço, Lanche da Tarde, Jantar).
5. **Formato JSON:** A saída DEVE ser um objeto JSON válido, começando com "{{" e terminando com "}}". Não inclua nenhum texto ou formatação fora do JSON.
6. **Quantidades e Medidas:** Use medidas precisas como gramas (g), quilogramas (kg), mililitros (ml) ou unidades (ex: "1 unidade", "2 fatias").
7. **Culinária Brasileira:** Baseie as refeições em pratos comuns no Brasil.

**Formato de Saída (JSON):**
{{
  "planos_alimentares": [
    {{
      "pessoa": "Pessoa 1",
      "descricao_pessoa": "Gênero masculino, 70kg, 175cm, 30 anos, TMB 1800 kcal",
      "objetivo_individual": "Descrição do objetivo ajustado para esta pessoa.",
      "plano_diario": [
        {{
          "dia": "Dia 1",
          "total_calorias_aproximadas": 1780,
          "refeicoes": [
            {{ "nome": "Café da Manhã", "descricao": "Ex: Omelete de 2 ovos com queijo e uma fatia de pão integral.", "calorias_aproximadas": 350 }},
            {{ "nome": "Almoço", "descricao": "Ex: 150g de frango grelhado, 100g de arroz, salada de alface e tomate.", "calorias_aproximadas": 500 }},
            {{ "nome": "Jantar", "descricao": "Ex: Sopa de legumes com pedaços de carne.", "calorias_aproximadas": 400 }}
          ]
        }}
      ]
    }}
  ]
}}"""
