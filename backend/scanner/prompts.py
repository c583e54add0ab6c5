EXTRACTION_PROMPT = """Extract all line items from this bill/receipt image. Focus on individual food/drink items or products with their prices.

Rules:
1. Extract ONLY purchasable items with prices - ignore headers, footers, totals, tax lines, subtotals, and service charges
2. For each item, provide the item name, the TOTAL price for that line, and quantity if shown
3. If an item shows "Pizza x2 $24.00", extract as: name="Pizza", price=24.00, quantity=2
4. If no quantity is shown, use quantity=1
5. Price should be the TOTAL for that line item (not per-unit price)
6. If a price is unclear or ambiguous, mark confidence as "low"
7. Prices should be numbers only (no currency symbols)

Output ONLY valid JSON in this exact format (no markdown, no code blocks, just raw JSON):
{"items":[{"name":"Item Name","price":12.99,"quantity":1,"confidence":"high"}],"warnings":["any issues encountered"]}"""
